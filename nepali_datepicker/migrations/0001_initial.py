from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='BSMonthLayout',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('bs_year', models.IntegerField(db_index=True, help_text='Bikram Sambat Year')),
                ('month', models.IntegerField(choices=[(1, 'Baisakh'), (2, 'Jestha'), (3, 'Ashadh'), (4, 'Shrawan'), (5, 'Bhadra'), (6, 'Ashwin'), (7, 'Kartik'), (8, 'Mangsir'), (9, 'Poush'), (10, 'Magh'), (11, 'Falgun'), (12, 'Chaitra')], db_index=True)),
                ('days_in_month', models.IntegerField(help_text='Number of days in this month')),
                ('first_weekday', models.IntegerField(choices=[(0, 'Sun'), (1, 'Mon'), (2, 'Tue'), (3, 'Wed'), (4, 'Thu'), (5, 'Fri'), (6, 'Sat')], help_text='Weekday of day 1 (0=Sunday)')),
                ('ad_start_date', models.DateField(blank=True, help_text='Gregorian date when this BS month starts', null=True)),
                ('probed_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'BS Month Layout',
                'verbose_name_plural': 'BS Month Layouts',
                'ordering': ['bs_year', 'month'],
                'unique_together': {('bs_year', 'month')},
            },
        ),
    ]
