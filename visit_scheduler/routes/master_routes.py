from flask import Blueprint, jsonify
from visit_scheduler.models import Client, Facility, Speciality, Team, TeamWorkingHours
from visit_scheduler.utils.qualification import get_team_speciality_ids

master_bp = Blueprint('master', __name__, url_prefix='/api/master')


@master_bp.route('', methods=['GET'])
def get_master_data():
    facilities = Facility.query.order_by(Facility.facility_name).all()
    facility_list = [
        {
            'facility_id': f.facility_id,
            'facility_name': f.facility_name,
            'is_paused': f.is_paused
        }
        for f in facilities
    ]
    
    specialities = Speciality.query.order_by(Speciality.speciality_name).all()
    speciality_list = [
        {
            'speciality_id': s.speciality_id,
            'speciality_name': s.speciality_name,
            'short_name': s.short_name,
            'color': s.color
        }
        for s in specialities
    ]
    
    teams = Team.query.order_by(Team.team_name).all()
    team_list = []
    for team in teams:
        hours = TeamWorkingHours.query.filter_by(team_id=team.team_id).order_by(TeamWorkingHours.day_of_week).all()
        team_list.append({
            'team_id': team.team_id,
            'team_name': team.team_name,
            'status': team.status,
            'speciality_ids': sorted(get_team_speciality_ids(team.team_id)),
            'working_hours': [
                {
                    'day_of_week': h.day_of_week,
                    'start': h.start_time.strftime('%H:%M'),
                    'end': h.end_time.strftime('%H:%M'),
                    'is_active': h.is_active
                }
                for h in hours
            ]
        })
    
    clients = Client.query.order_by(Client.client_name).all()
    client_list = [
        {
            'client_id': c.client_id,
            'client_name': c.client_name,
            'facility_id': c.facility_id
        }
        for c in clients
    ]
    
    return jsonify({
        'facilities': facility_list,
        'specialities': speciality_list,
        'teams': team_list,
        'clients': client_list
    }), 200
