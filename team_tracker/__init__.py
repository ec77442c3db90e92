"""
Team status tracker: schedule, record and live-score refresh for a single team.
"""
