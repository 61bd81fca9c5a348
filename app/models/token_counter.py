from tortoise import fields, models


class TokenCounter(models.Model):
    """
    Named sequence row. Token numbers are allocated by an atomic increment
    of `value`, so two concurrent orders can never draw the same token.
    """
    id = fields.IntField(primary_key=True)
    name = fields.CharField(max_length=64, unique=True)
    value = fields.IntField(default=0)

    class Meta:
        table = "token_counters"
