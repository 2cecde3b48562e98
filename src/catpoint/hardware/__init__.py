"""Catpoint camera classifiers (optional ultralytics backend)"""
