"""Live FIDS arrivals/departures scraping and normalization."""
