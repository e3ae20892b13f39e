from catalog_browser.models.items import CamelModel


class Stats(CamelModel):
    total: int
    average_price: float
    timestamp: int
