"""Admin back-office API"""
