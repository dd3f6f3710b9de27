"""Shared test fixtures and factories"""
