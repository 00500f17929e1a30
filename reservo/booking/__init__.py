"""Reservation status decision and lifecycle engine"""
