# clinic_booking/data.py

# Persisted keys (one flat key-value store per browser profile)
CURRENT_USER_KEY = "currentUser"
USERS_KEY = "users"
APPOINTMENTS_KEY = "appointments"

# Daily slot labels, lunch hour excluded
TIME_SLOTS = [
    "08:00", "09:00", "10:00", "11:00",
    "13:00", "14:00", "15:00", "16:00", "17:00",
]

clinic_settings = {
    "name": "Dente Feliz",
    "working_days": [0, 1, 2, 3, 4],  # 0=Mon ... 4=Fri
    "time_format": "%H:%M",
}
