# constants.py

SESSION_COOKIE_NAME = "auth-token"
SESSION_MAX_AGE = 24 * 60 * 60  # seconds

# Built-in accounts used when real data is disabled (or the database is down)
demo_users = [
    {
        "id": "1",
        "username": "fraud.analyst",
        "email": "analyst@fraudguard.com",
        "password": "demo123",
        "role": "ANALYST",
        "permissions": ["view_dashboard", "export_reports", "manage_cases"],
    },
    {
        "id": "2",
        "username": "admin",
        "email": "admin@fraudguard.com",
        "password": "admin123",
        "role": "ADMIN",
        "permissions": ["view_dashboard", "export_reports", "manage_cases", "admin_panel"],
    },
    {
        "id": "3",
        "username": "demo",
        "email": "demo@fraudguard.com",
        "password": "demo",
        "role": "DEMO",
        "permissions": ["view_dashboard"],
    },
]

role_descriptions = {
    "ANALYST": ("Fraud Analyst", "Full access to fraud detection features"),
    "ADMIN": ("Administrator", "Complete system access with admin privileges"),
    "DEMO": ("Demo User", "Limited access for demonstration purposes"),
}
