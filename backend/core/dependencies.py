"""
FastAPI dependencies
"""
from fastapi import Request


def get_db(request: Request):
    """Database handle opened by the app lifespan"""
    return request.app.state.db


def get_wedding_data(request: Request):
    return request.app.state.wedding_data
