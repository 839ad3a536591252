from visit_scheduler.models.facility import Facility
from visit_scheduler.models.client import Client
from visit_scheduler.models.speciality import Speciality
from visit_scheduler.models.team import Team
from visit_scheduler.models.team_speciality import TeamSpeciality
from visit_scheduler.models.working_hours import TeamWorkingHours
from visit_scheduler.models.time_off import TeamTimeOff
from visit_scheduler.models.appointment import Appointment
from visit_scheduler.models.copy_week_batch import CopyWeekBatch
from visit_scheduler.models.draft_appointment import DraftAppointment

__all__ = [
    'Facility',
    'Client',
    'Speciality',
    'Team',
    'TeamSpeciality',
    'TeamWorkingHours',
    'TeamTimeOff',
    'Appointment',
    'CopyWeekBatch',
    'DraftAppointment'
]
