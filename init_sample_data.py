"""
Wipe and seed sample scheduling data

- 3 facilities (one paused)
- 4 specialities
- 6 team members with qualifications, working hours and one approved time off
- 12 clients
- one week of committed appointments starting this week

Usage:
    python init_sample_data.py
"""

from visit_scheduler import create_app
from visit_scheduler.extensions import db
from visit_scheduler.models import (
    Appointment, Client, CopyWeekBatch, DraftAppointment, Facility, Speciality,
    Team, TeamSpeciality, TeamTimeOff, TeamWorkingHours
)
from visit_scheduler.utils.weeks import start_of_week
from datetime import date, datetime, time, timedelta
import random


def clear_existing_data():
    """Delete in FK order so this also works on SQLite"""
    print("🗑️  Clearing existing data...")
    
    for model in [DraftAppointment, CopyWeekBatch, Appointment, TeamTimeOff, TeamWorkingHours,
                  TeamSpeciality, Team, Client, Speciality, Facility]:
        model.query.delete()
    
    db.session.commit()
    print("✅ Existing data cleared")


def init_facilities():
    print("🏠 Creating facilities...")
    
    facilities = [
        Facility(facility_name='Maple House', is_paused=False),
        Facility(facility_name='Riverside Residence', is_paused=False),
        Facility(facility_name='Oak Lodge', is_paused=True),
    ]
    db.session.add_all(facilities)
    db.session.commit()
    
    print(f"✅ {len(facilities)} facilities created")
    return facilities


def init_specialities():
    print("🩺 Creating specialities...")
    
    specialities = [
        Speciality(speciality_name='Personal Care', short_name='PC', color='#2563eb'),
        Speciality(speciality_name='Nursing', short_name='RN', color='#dc2626'),
        Speciality(speciality_name='Physiotherapy', short_name='PT', color='#16a34a'),
        Speciality(speciality_name='Companionship', short_name='CO', color='#9333ea'),
    ]
    db.session.add_all(specialities)
    db.session.commit()
    
    print(f"✅ {len(specialities)} specialities created")
    return specialities


def init_teams(specialities, week_start):
    """Team members with 1-2 specialities and weekday hours"""
    print("👥 Creating team members...")
    
    team_data = [
        # (name, first hour, last hour, works weekends)
        ('Alice Morgan', 8, 16, False),
        ('Ben Carter', 9, 17, False),
        ('Chloe Nguyen', 7, 15, True),
        ('Daniel Reyes', 10, 18, False),
        ('Emma Walsh', 8, 14, True),
        ('Farid Haddad', 12, 20, False),
    ]
    
    teams = []
    for name, first_hour, last_hour, weekends in team_data:
        team = Team(team_name=name, status='active')
        db.session.add(team)
        db.session.flush()
        
        for speciality in random.sample(specialities, random.randint(1, 2)):
            db.session.add(TeamSpeciality(team_id=team.team_id, speciality_id=speciality.speciality_id))
        
        for day in range(7):
            db.session.add(TeamWorkingHours(
                team_id=team.team_id,
                day_of_week=day,
                start_time=time(first_hour, 0),
                end_time=time(last_hour, 0),
                is_active=day < 5 or weekends
            ))
        
        teams.append(team)
    
    # one approved leave in the following week
    db.session.add(TeamTimeOff(
        team_id=teams[1].team_id,
        start_date=week_start + timedelta(days=8),
        end_date=week_start + timedelta(days=9),
        status='approved',
        reason='Annual leave'
    ))
    
    db.session.commit()
    print(f"✅ {len(teams)} team members created")
    return teams


def init_clients(facilities):
    print("🧓 Creating clients...")
    
    names = ['Harold Finch', 'Irene Adler', 'June Park', 'Karl Olsen', 'Lena Fischer', 'Martin Cole',
             'Nora Diaz', 'Oscar Banks', 'Priya Shah', 'Quentin Hale', 'Rosa Lima', 'Sam Turner']
    
    clients = []
    for i, name in enumerate(names):
        facility = facilities[i % len(facilities)] if i % 2 == 0 else None
        clients.append(Client(
            client_name=name,
            facility_id=facility.facility_id if facility else None
        ))
    
    db.session.add_all(clients)
    db.session.commit()
    
    print(f"✅ {len(clients)} clients created")
    return clients


def init_appointments(clients, teams, week_start):
    """One visit per client per weekday slot, respecting team hours"""
    print("📅 Creating committed appointments...")
    
    appointments = []
    team_busy_until = {}
    
    for day_offset in range(5):
        day = week_start + timedelta(days=day_offset + 1)  # Monday..Friday
        for client in random.sample(clients, 6):
            team = random.choice(teams)
            hours = TeamWorkingHours.query.filter_by(team_id=team.team_id, day_of_week=day.weekday()).first()
            
            start = team_busy_until.get((team.team_id, day), datetime.combine(day, hours.start_time))
            end = start + timedelta(minutes=random.choice([30, 60, 90]))
            if end > datetime.combine(day, hours.end_time):
                continue
            
            team_specialities = TeamSpeciality.query.filter_by(team_id=team.team_id).all()
            appointments.append(Appointment(
                client_id=client.client_id,
                team_id=team.team_id,
                speciality_id=random.choice(team_specialities).speciality_id if team_specialities else None,
                start_time=start,
                end_time=end,
                title=f'Visit - {client.client_name}',
                status='scheduled'
            ))
            team_busy_until[(team.team_id, day)] = end
    
    db.session.add_all(appointments)
    db.session.commit()
    
    print(f"✅ {len(appointments)} appointments created")
    return appointments


def main():
    print("\n" + "=" * 80)
    print("🚀 Starting Sample Data Generation")
    print("=" * 80 + "\n")
    
    app = create_app()
    
    with app.app_context():
        week_start = start_of_week(date.today(), app.config['WEEK_STARTS_ON'])
        
        clear_existing_data()
        
        facilities = init_facilities()
        specialities = init_specialities()
        teams = init_teams(specialities, week_start)
        clients = init_clients(facilities)
        appointments = init_appointments(clients, teams, week_start)
        
        print("\n" + "=" * 80)
        print("✨ Sample Data Generation Complete!")
        print(f"Week {week_start}: {len(teams)} team members, {len(clients)} clients, "
              f"{len(appointments)} appointments")
        print("=" * 80)
        
        print("💡 Tip: copy this week into next week as drafts:")
        print("   POST /api/draft-appointments/copy-week")
        print("   {")
        print(f'     "source_week": "{week_start}",')
        print(f'     "target_week": "{week_start + timedelta(days=7)}"')
        print("   }\n")


if __name__ == '__main__':
    main()
