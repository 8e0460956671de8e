"""
Configuration file for pytest to set up the testing environment.
"""
import matplotlib

# Plots are rendered off-screen in tests
matplotlib.use('Agg')
