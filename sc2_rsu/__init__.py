"""SC2 Replay Uploader — automatic sc2replaystats uploads.

Watches the StarCraft II multiplayer replay folders of every local account,
waits for each new replay to finish being written, uploads it to
sc2replaystats and follows the upload until the service has processed it.
"""

__version__ = "1.0.0"
__app_name__ = "SC2 Replay Uploader"
