"""Cover template writers (PDF, PSD, IDML) and cover PDF validation"""
