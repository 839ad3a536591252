from visit_scheduler.models import DraftAppointment
from visit_scheduler.utils.weeks import week_bounds


def week_filter(model, week_start):
    start, end = week_bounds(week_start)
    return (model.start_time >= start) & (model.start_time < end)


def select_drafts(draft_ids=None, week_start=None):
    """Drafts targeted by id list or by week, oldest slot first."""
    query = DraftAppointment.query
    
    if draft_ids is not None:
        if not draft_ids:
            return []
        query = query.filter(DraftAppointment.draft_id.in_(draft_ids))
    elif week_start is not None:
        query = query.filter(week_filter(DraftAppointment, week_start))
    else:
        return []
    
    return query.order_by(DraftAppointment.start_time, DraftAppointment.draft_id).all()
