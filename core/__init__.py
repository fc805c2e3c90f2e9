"""core/ -- Kernel modules shared by every layer. Imports nothing from api/ or auth/."""
