"""OneBot message model and API client, Lagrange actions, NapCat node helpers,
an admin command plugin and a daily like plugin."""

__version__ = "0.1.0"