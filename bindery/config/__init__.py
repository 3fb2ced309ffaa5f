"""Units, binding policies and runtime settings"""
