"""DogCam: Google-authenticated MJPEG viewer for a single still image."""
