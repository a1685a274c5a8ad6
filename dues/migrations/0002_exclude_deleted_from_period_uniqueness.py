from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ('dues', '0001_initial'),
        ('pharmacies', '0001_initial'),
    ]

    operations = [
        migrations.RemoveConstraint(
            model_name='due',
            name='unique_due_per_pharmacy_type_period',
        ),
        migrations.AddConstraint(
            model_name='due',
            constraint=models.UniqueConstraint(condition=models.Q(('due_type__isnull', False), ('is_deleted', False)), fields=('pharmacy', 'due_type', 'period'), name='unique_due_per_pharmacy_type_period'),
        ),
    ]
