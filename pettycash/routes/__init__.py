"""Blueprints for Petty Cash Manager"""
