"""
Business services of the to-do API.

- auth_service: registration, login and the OTP password reset flow
- task_service: owner-scoped task operations
- mail_service: delivery of reset codes over SMTP
"""
