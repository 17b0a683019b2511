from uuid import uuid4
from flask import current_app
from services.site_data_service import find_section, write_section
from utils.errors import ConflictError, NotFoundError, ValidationError
from utils.permissions import Permission, require_permission
from utils.time_utils import utc_now


class SectionItemsService:
    """
    Items kept as one JSON array inside a single site data section (portfolio, gallery).

    Items are addressed by an application-generated ``id``. Every write reads the
    section, edits a copy of the array and writes the whole array back.
    """

    def __init__(self, section, label):
        self.section = section
        self.label = label

    def _load(self):
        document = find_section(self.section)
        if document is None:
            raise NotFoundError(f"{self.label} not found")
        return document

    def _items(self, document):
        if document is None:
            return []
        if not isinstance(document.data, list):
            raise ConflictError(f"{self.label} section does not hold a list of items")
        return list(document.data)

    @staticmethod
    def _index_of(items, item_id):
        for index, item in enumerate(items):
            if isinstance(item, dict) and item.get('id') == item_id:
                return index
        return -1

    def list_items(self):
        document = find_section(self.section)
        return self._items(document), 200

    def get_item(self, item_id):
        items = self._items(self._load())
        index = self._index_of(items, item_id)
        if index == -1:
            raise NotFoundError(f"{self.label} item not found")
        return items[index], 200

    def add_item(self, current_user, data):
        require_permission(current_user, Permission.ALL)
        if not isinstance(data, dict):
            raise ValidationError("Invalid JSON body")

        item = {**data, 'id': uuid4().hex, 'createdAt': utc_now().isoformat()}
        document = find_section(self.section)
        items = self._items(document)
        items.append(item)
        write_section(self.section, items, document)
        current_app.logger.info(f"{self.label} item {item['id']} added by user {current_user.id}")

        return {'message': f'{self.label} item added successfully', 'item': item}, 201

    def update_item(self, current_user, item_id, data):
        require_permission(current_user, Permission.ALL)
        if not isinstance(data, dict):
            raise ValidationError("Invalid JSON body")

        document = self._load()
        items = self._items(document)
        index = self._index_of(items, item_id)
        if index == -1:
            raise NotFoundError(f"{self.label} item not found")

        changes = {key: value for key, value in data.items() if key not in ('id', 'createdAt')}
        items[index] = {**items[index], **changes, 'updatedAt': utc_now().isoformat()}
        write_section(self.section, items, document)

        return {'message': f'{self.label} item updated successfully', 'item': items[index]}, 200

    def delete_item(self, current_user, item_id):
        require_permission(current_user, Permission.ALL)
        document = self._load()
        items = self._items(document)
        index = self._index_of(items, item_id)
        if index == -1:
            raise NotFoundError(f"{self.label} item not found")

        del items[index]
        write_section(self.section, items, document)
        current_app.logger.info(f"{self.label} item {item_id} deleted by user {current_user.id}")

        return {'message': f'{self.label} item deleted successfully'}, 200


portfolio_items = SectionItemsService('portfolio', 'Portfolio')
gallery_items = SectionItemsService('gallery', 'Gallery')
