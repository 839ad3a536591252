from visit_scheduler.models import TeamSpeciality


def get_team_speciality_ids(team_id):
    rows = TeamSpeciality.query.filter_by(team_id=team_id).all()
    return {row.speciality_id for row in rows}


def check_qualification(team_id, speciality_id):
    """A team with no qualification rows is treated as qualified."""
    if team_id is None or speciality_id is None:
        return True
    
    speciality_ids = get_team_speciality_ids(team_id)
    if not speciality_ids:
        return True
    
    return speciality_id in speciality_ids


def get_qualified_teams(speciality_id, teams):
    qualified = []
    
    for team in teams:
        if team.status != 'active':
            continue
        
        if check_qualification(team.team_id, speciality_id):
            qualified.append(team)
    
    return qualified
