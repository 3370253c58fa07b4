COLLISION_POLICIES = ['last', 'first', 'raise']  # copy_with_conversion key collision handling

class FrameColumn:
    ROW = "row"
    COLUMN = "column"
    VALUE = "value"
