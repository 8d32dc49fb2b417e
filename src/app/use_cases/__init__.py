"""
Use Cases

Organized by domain folder:
- teams/: Teams and team members
- projects/: Projects and project members
- sprints/: Sprint lifecycle, backlog and reports
- tasks/: Work items
- bandwidth/: Monthly capacity reports
- notifications/: In-app notifications
- reminders/: Scheduled reminder jobs
- analytics/: Admin dashboards

Import from subdirectories.
"""
