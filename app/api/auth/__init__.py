"""Authentication and account API"""
