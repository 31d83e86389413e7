"""evodock: provision Evolution API, Postgres, Manager and NGINX on one host."""
