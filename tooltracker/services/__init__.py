"""Service layer: assignment lifecycle and derived queries"""
