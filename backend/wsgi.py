# backend/wsgi.py
from bms import create_app

app = create_app()
