from fastapi import Request

from todo_api.services.auth_service import AuthService
from todo_api.services.mail_service import OtpMailer
from todo_api.services.task_service import TaskService


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_task_service(request: Request) -> TaskService:
    return request.app.state.task_service


def get_mailer(request: Request) -> OtpMailer:
    return request.app.state.mailer
