import hmac

from flask import Blueprint, current_app, jsonify, request

auth_bp = Blueprint('auth', __name__, url_prefix='/api')


@auth_bp.route('/login', methods=['POST'])
def login():
    data = request.get_json(silent=True) or {}
    password = data.get('password')

    expected = current_app.config['ADMIN_PASSWORD']
    if isinstance(password, str) and hmac.compare_digest(password.encode(), expected.encode()):
        return jsonify({'success': True})

    current_app.logger.warning("Failed admin login from %s", request.remote_addr)
    return jsonify({'success': False, 'message': 'Invalid password'}), 401
