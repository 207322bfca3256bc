"""sitesweep.parser: извлечение данных из DOM-снимка загруженной страницы."""
