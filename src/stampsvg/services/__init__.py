"""Services: asset resolution, outline loading and document file I/O"""
