import logging

from flask import Blueprint, jsonify
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from visit_scheduler.extensions import db

logger = logging.getLogger(__name__)

health_bp = Blueprint('health', __name__)


@health_bp.route('/health', methods=['GET'])
def health():
    try:
        db.session.execute(text('SELECT 1'))
    except SQLAlchemyError:
        logger.error("Database health check failed", exc_info=True)
        return jsonify({'status': 'unhealthy', 'database': 'unreachable'}), 503
    
    return jsonify({'status': 'healthy', 'database': 'ok'}), 200
