"""CodeSync API: sessions and a virtual file tree per session."""
