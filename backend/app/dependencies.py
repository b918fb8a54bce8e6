# backend/app/dependencies.py
from fastapi import Request

from app.lib.contact import ContactHandler


def get_contact_handler(request: Request) -> ContactHandler:
    # built once in create_app() and shared by every request
    return request.app.state.contact_handler
