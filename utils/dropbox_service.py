import logging
import mimetypes

import dropbox
from dropbox.exceptions import ApiError

logger = logging.getLogger(__name__)


class DropboxStorage:
    """Object storage for certificate templates and generated documents.

    Paths passed in are relative to ``root``; the client is created on first
    use so that importing this module never needs credentials.
    """

    def __init__(self, app_key, app_secret, refresh_token, root="/AnchorLMS", client=None):
        self.app_key = app_key
        self.app_secret = app_secret
        self.refresh_token = refresh_token
        self.root = "/" + root.strip("/")
        self._client = client

    @classmethod
    def from_config(cls, config):
        return cls(
            app_key=config.get("DROPBOX_APP_KEY"),
            app_secret=config.get("DROPBOX_APP_SECRET"),
            refresh_token=config.get("DROPBOX_REFRESH_TOKEN"),
            root=config.get("DROPBOX_ROOT", "/AnchorLMS"),
        )

    @property
    def client(self):
        if self._client is None:
            if not all([self.app_key, self.app_secret, self.refresh_token]):
                raise ValueError("Missing Dropbox credentials! Set DROPBOX_APP_KEY, DROPBOX_APP_SECRET, and DROPBOX_REFRESH_TOKEN.")
            # Refresh-token auth keeps the short-lived access token current
            self._client = dropbox.Dropbox(
                oauth2_refresh_token=self.refresh_token,
                app_key=self.app_key,
                app_secret=self.app_secret,
            )
        return self._client

    def full_path(self, path):
        return f"{self.root}/{path.lstrip('/')}"

    def download_file(self, path):
        dropbox_path = self.full_path(path)
        try:
            _, response = self.client.files_download(dropbox_path)
        except ApiError as e:
            logger.error("Dropbox download failed for %s: %s", dropbox_path, e)
            raise
        return response.content

    def upload_file(self, data, path, content_type="application/octet-stream"):
        """Upload ``data`` and return ``(public_url, dropbox_path)``.

        Dropbox derives the served type from the file extension, so the
        extension must agree with ``content_type``.
        """
        guessed, _ = mimetypes.guess_type(path)
        if guessed and guessed != content_type:
            raise ValueError(f"Path {path} does not match content type {content_type}")

        dropbox_path = self.full_path(path)
        try:
            self.client.files_upload(data, dropbox_path, mode=dropbox.files.WriteMode("overwrite"))
        except ApiError as e:
            logger.error("Dropbox upload failed for %s: %s", dropbox_path, e)
            raise

        shared_link = None
        try:
            existing_links = self.client.sharing_list_shared_links(path=dropbox_path).links
            if existing_links:
                shared_link = existing_links[0]
        except ApiError as e:
            logger.warning("Could not list shared links for %s: %s", dropbox_path, e)

        if not shared_link:
            shared_link = self.client.sharing_create_shared_link_with_settings(dropbox_path)

        public_url = shared_link.url.replace("?dl=0", "?raw=1")
        return public_url, dropbox_path

    def delete_file(self, dropbox_path):
        if not dropbox_path.startswith(self.root + "/"):
            logger.warning("Refusing to delete path outside storage root: %s", dropbox_path)
            return False
        try:
            self.client.files_delete_v2(dropbox_path)
        except ApiError as e:
            logger.error("Dropbox delete failed for %s: %s", dropbox_path, e)
            return False
        logger.info("File deleted from Dropbox: %s", dropbox_path)
        return True
