"""Auth Service: registro, login con JWT y gestión de perfil de usuarios."""
