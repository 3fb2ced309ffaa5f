"""InDesign Markup Language package model"""
