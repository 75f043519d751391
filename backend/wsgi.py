# backend/wsgi.py
from lunishop import create_app

app = create_app()
