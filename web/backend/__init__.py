"""HTTP backend for Bindery Templates"""
