# Overview: Application settings read from the environment, overridable per app via create_app.

from __future__ import annotations
import os


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # Relative sqlite paths resolve under the Flask instance folder
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL", "sqlite:///cafeteria.sqlite3")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Razorpay credentials; the secret is only used server-side for signatures
    RAZORPAY_KEY_ID = os.environ.get("RAZORPAY_KEY_ID", "rzp_test_dev")
    RAZORPAY_KEY_SECRET = os.environ.get("RAZORPAY_KEY_SECRET", "dev-razorpay-secret")
    RAZORPAY_API_BASE = os.environ.get("RAZORPAY_API_BASE", "https://api.razorpay.com/v1")
    RAZORPAY_TIMEOUT_SECONDS = float(os.environ.get("RAZORPAY_TIMEOUT_SECONDS", "10"))

    # Pickup estimate for new orders
    ORDER_READY_MINUTES = int(os.environ.get("ORDER_READY_MINUTES", "15"))
