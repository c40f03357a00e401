"""Timesaver landing page service.

Hours-saved calculator, analytics and lead capture behind a FastAPI app.
"""
