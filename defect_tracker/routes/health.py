from flask import Blueprint, jsonify

from defect_tracker.utils.helpers import utcnow

health_bp = Blueprint('health', __name__)


@health_bp.route('/health', methods=['GET'])
def health():
    return jsonify({'status': 'OK', 'timestamp': utcnow().isoformat() + 'Z'}), 200
