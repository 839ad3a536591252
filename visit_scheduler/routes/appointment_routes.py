from datetime import datetime

from flask import Blueprint, current_app, jsonify, request
from visit_scheduler.models import Client, Team
from visit_scheduler.services.appointment_service import create_appointment, list_appointments
from visit_scheduler.extensions import db
from visit_scheduler.utils.weeks import parse_date, start_of_week

appointment_bp = Blueprint('appointments', __name__, url_prefix='/api/appointments')


def serialize_appointment(appointment):
    client = db.session.get(Client, appointment.client_id)
    team = db.session.get(Team, appointment.team_id) if appointment.team_id else None
    
    return {
        'appointment_id': appointment.appointment_id,
        'client_id': appointment.client_id,
        'client_name': client.client_name if client else None,
        'team_id': appointment.team_id,
        'team_name': team.team_name if team else None,
        'speciality_id': appointment.speciality_id,
        'start_time': appointment.start_time.isoformat(),
        'end_time': appointment.end_time.isoformat(),
        'title': appointment.title,
        'notes': appointment.notes,
        'status': appointment.status
    }


@appointment_bp.route('', methods=['GET'])
def get_appointments():
    week_start = request.args.get('week_start')
    if not week_start:
        return jsonify({'error': 'week_start is required'}), 400
    
    try:
        week = start_of_week(parse_date(week_start), current_app.config['WEEK_STARTS_ON'])
    except ValueError:
        return jsonify({'error': 'week_start must be YYYY-MM-DD'}), 400
    
    appointments = list_appointments(week)
    
    return jsonify({
        'week_start': week.isoformat(),
        'appointments': [serialize_appointment(a) for a in appointments],
        'total': len(appointments)
    }), 200


@appointment_bp.route('', methods=['POST'])
def post_appointment():
    data = request.get_json(silent=True) or {}
    
    if not data.get('client_id') or not data.get('start_time') or not data.get('end_time'):
        return jsonify({'error': 'client_id, start_time and end_time are required'}), 400
    
    try:
        start_time = datetime.fromisoformat(data['start_time'])
        end_time = datetime.fromisoformat(data['end_time'])
    except ValueError:
        return jsonify({'error': 'start_time and end_time must be ISO datetimes'}), 400
    
    if end_time <= start_time:
        return jsonify({'error': 'end_time must be after start_time'}), 400
    
    # conflicts surface as SchedulingConflictError -> 409
    appointment = create_appointment(
        client_id=data['client_id'],
        start_time=start_time,
        end_time=end_time,
        team_id=data.get('team_id'),
        speciality_id=data.get('speciality_id'),
        title=data.get('title'),
        notes=data.get('notes')
    )
    
    return jsonify({
        'success': True,
        'data': serialize_appointment(appointment)
    }), 201
