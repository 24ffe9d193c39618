"""TL (Type Language) primitives, field tags, pseudo objects and the constructor registry."""