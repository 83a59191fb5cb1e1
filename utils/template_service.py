import logging

import requests

logger = logging.getLogger(__name__)


def fetch_template_from_url(url, timeout=10):
    response = requests.get(url, timeout=timeout)
    response.raise_for_status()
    return response.content


def build_template_loader(config, storage):
    """Return a zero-argument callable that yields the template PDF bytes.

    A configured public URL wins; otherwise the template is read from
    storage at CERTIFICATE_TEMPLATE_PATH.
    """
    url = config.get("CERTIFICATE_TEMPLATE_URL")
    if url:
        timeout = config.get("CERTIFICATE_TEMPLATE_TIMEOUT", 10)

        def load_from_url():
            logger.debug("Fetching certificate template from %s", url)
            return fetch_template_from_url(url, timeout=timeout)
        return load_from_url

    path = f"{config.get('CERTIFICATE_FOLDER', 'certificates')}/{config.get('CERTIFICATE_TEMPLATE_PATH')}"

    def load_from_storage():
        logger.debug("Fetching certificate template from storage at %s", path)
        return storage.download_file(path)
    return load_from_storage
