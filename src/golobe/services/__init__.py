"""
Business services for Golobe.

- analytics.py: global signup/booking counters
- email.py: outgoing email via SES and the welcome template
- passwords.py: bcrypt password hashing
- signup.py: signup form validation and account creation workflow
"""

__all__: list[str] = []
