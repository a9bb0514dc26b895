class PathError(ValueError):
    pass


class KeywordError(ValueError):
    pass


class FrontmatterError(ValueError):
    pass
