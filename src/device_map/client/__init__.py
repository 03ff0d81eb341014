"""Map client: data sync, marker rendering and the add-device interaction."""
