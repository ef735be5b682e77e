# backend/wsgi.py
from cafeteria import create_app

app = create_app()
