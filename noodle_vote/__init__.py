"""Jjajang vs jjamppong vote service."""
