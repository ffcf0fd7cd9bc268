"""captcha_scout.crawler: загрузка страниц, обход ссылок и сбор записей."""
