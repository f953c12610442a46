from utils.catalog.window import CatalogWindow, page_size_for_width
