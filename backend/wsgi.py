# backend/wsgi.py
from goodies import create_app

app = create_app()
