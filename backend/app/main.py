from flask import Blueprint, current_app, jsonify

main = Blueprint('main', __name__)


@main.route('/')
@main.route('/health')
def index():
    return jsonify({
        'status': 'online',
        'game': 'Tic-Tac-Toe Multiplayer',
        'rooms': current_app.extensions['rooms'].room_count(),
    })
