"""wslprovision CLI commands"""
