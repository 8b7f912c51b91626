from flask import Blueprint, current_app, jsonify

main = Blueprint('main', __name__)


@main.route('/health', methods=['GET'])
def health():
    services = current_app.extensions['arena']
    return jsonify({
        'status': 'ok',
        'rooms': services.store.count(),
        'waiting': services.matchmaker.waiting_sid is not None,
    })
