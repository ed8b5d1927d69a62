"""stackstarter -- scaffold an Express + React (Vite) + Tailwind CSS project."""

__version__ = "0.1.0"
